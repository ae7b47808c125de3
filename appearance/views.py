from django.http import JsonResponse
from django.views.decorators.http import require_GET, require_http_methods

from egg_backend.responses import BadRequestError, json_error, parse_body, staff_required

from .models import SoundEffect
from .services import ConfigError, active_sounds, activate_sound, load_egg_config, update_egg_config


def _json(payload: dict) -> JsonResponse:
    return JsonResponse(payload, json_dumps_params={"ensure_ascii": False})


@require_GET
def egg_config(request):
    """Return the egg layout and smash effect shown on the draw page."""
    return _json(load_egg_config())


@require_http_methods(["PUT"])
@staff_required
def update_config(request):
    try:
        config = update_egg_config(parse_body(request))
    except (BadRequestError, ConfigError) as exc:
        return json_error(str(exc))
    return _json({"success": True, "config": config})


@require_GET
def sounds(request):
    return _json(active_sounds())


@require_http_methods(["POST", "PUT"])
@staff_required
def activate(request, sound_id: int):
    try:
        sound = activate_sound(sound_id)
    except SoundEffect.DoesNotExist:
        return json_error("Sound effect does not exist.", status=404, code="not_found")
    return _json({"success": True, "sound": {"id": sound.id, **sound.to_payload()}})
