"""Front-page presentation settings: egg configuration and sound effects."""

from django.db import models


class SiteSetting(models.Model):
    """A single key/value configuration entry read by the public page."""

    key = models.CharField(max_length=64, primary_key=True)
    value = models.TextField(blank=True)

    class Meta:
        ordering = ["key"]

    def __str__(self) -> str:  # pragma: no cover - trivial representation
        return f"{self.key}={self.value}"


class SoundEffect(models.Model):
    """An audio clip played when an egg is hit or a prize is won.

    At most one sound per type is active; use ``activate_sound`` rather than
    toggling ``is_active`` directly.
    """

    class SoundType(models.TextChoices):
        HIT = "hit", "Hit"
        WIN = "win", "Win"

    type = models.CharField(max_length=8, choices=SoundType.choices)
    name = models.CharField(max_length=255)
    url = models.CharField(
        max_length=512,
        help_text="Filesystem or CDN path to the audio file.",
    )
    is_active = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["type", "-created_at"]

    def __str__(self) -> str:
        flag = " (active)" if self.is_active else ""
        return f"[{self.type}] {self.name}{flag}"

    def to_payload(self) -> dict:
        return {"type": self.type, "name": self.name, "url": self.url}
