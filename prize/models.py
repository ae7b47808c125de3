from __future__ import annotations

from django.core.validators import MinValueValidator
from django.db import models


class Prize(models.Model):
    """A prize in the draw pool with remaining stock and a selection weight."""

    name = models.CharField(max_length=255)
    image = models.CharField(
        max_length=512,
        blank=True,
        help_text="Filesystem or CDN path to the prize image.",
    )
    stock = models.PositiveIntegerField(default=0)
    probability = models.FloatField(
        default=1,
        validators=[MinValueValidator(0)],
        help_text="Relative selection weight; weights need not sum to 100.",
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-probability", "id"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(probability__gte=0),
                name="prize_probability_non_negative",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.name} (stock={self.stock})"

    def to_payload(self) -> dict[str, int | str]:
        return {
            "id": self.id,
            "name": self.name,
            "image": self.image,
        }

    def to_pool_payload(self) -> dict[str, int | str]:
        payload = self.to_payload()
        payload["stock"] = self.stock
        return payload


class DrawRecord(models.Model):
    """Append-only log entry written once per successful draw.

    ``prize_id`` is a plain column rather than a foreign key: deleting a prize
    must leave its history intact, and ``prize_name`` keeps the name the prize
    had when it was won.
    """

    prize_id = models.BigIntegerField(db_index=True)
    prize_name = models.CharField(max_length=255)
    created_at = models.DateTimeField(auto_now_add=True, db_index=True)

    class Meta:
        ordering = ["-created_at", "-id"]

    def __str__(self) -> str:  # pragma: no cover - trivial representation
        return f"{self.prize_name} @ {self.created_at:%Y-%m-%d %H:%M:%S}"
