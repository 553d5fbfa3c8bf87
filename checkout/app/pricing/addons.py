"""Add-on ledger: resolves selections against the catalog and prices them."""

import logging
from collections.abc import Sequence

from checkout.app.models.extras import AddonCatalogEntry, AddonLine, AddonSelection

logger = logging.getLogger(__name__)


class UnknownAddonError(LookupError):
    """Selection refers to an add-on that is not in the catalog."""

    pass


class AddonLedger:
    """Prices add-on selections for a stay length.

    The ledger keeps no running total: every figure is derived from the
    selections passed in, so the draft remains the only state.
    """

    def __init__(self, catalog: Sequence[AddonCatalogEntry]) -> None:
        self._catalog: dict[str, AddonCatalogEntry] = {entry.id: entry for entry in catalog}

    @property
    def catalog(self) -> list[AddonCatalogEntry]:
        return list(self._catalog.values())

    def resolve(self, addon_id: str) -> AddonCatalogEntry | None:
        """Look up a catalog entry by id."""
        return self._catalog.get(addon_id)

    def _require(self, addon_id: str) -> AddonCatalogEntry:
        entry = self.resolve(addon_id)
        if entry is None:
            raise UnknownAddonError(f"Unknown add-on: {addon_id}")
        return entry

    def toggle(self, selections: Sequence[AddonSelection], addon_id: str) -> list[AddonSelection]:
        """Add the add-on with quantity 1, or remove it if already selected."""
        self._require(addon_id)
        if any(s.addon_id == addon_id for s in selections):
            return [s for s in selections if s.addon_id != addon_id]
        return [*selections, AddonSelection(addon_id=addon_id, quantity=1)]

    def set_quantity(
        self, selections: Sequence[AddonSelection], addon_id: str, quantity: int
    ) -> list[AddonSelection]:
        """Set the quantity for an add-on; zero removes it."""
        self._require(addon_id)
        if quantity < 0:
            raise ValueError(f"quantity must be >= 0, got {quantity}")

        remaining = [s for s in selections if s.addon_id != addon_id]
        if quantity == 0:
            return remaining

        updated = AddonSelection(addon_id=addon_id, quantity=quantity)
        # Keep the existing position when updating a selection
        for i, s in enumerate(selections):
            if s.addon_id == addon_id:
                result = list(selections)
                result[i] = updated
                return result
        return [*remaining, updated]

    def validate(self, selections: Sequence[AddonSelection]) -> list[AddonSelection]:
        """Check every selection resolves and ids are unique."""
        seen: set[str] = set()
        for s in selections:
            self._require(s.addon_id)
            if s.addon_id in seen:
                raise ValueError(f"Duplicate add-on selection: {s.addon_id}")
            seen.add(s.addon_id)
        return list(selections)

    def line_items(self, selections: Sequence[AddonSelection], nights: int) -> list[AddonLine]:
        """Resolve each selection to a priced line.

        Selections that no longer resolve (catalog changed) are dropped.
        """
        lines: list[AddonLine] = []
        for selection in selections:
            entry = self.resolve(selection.addon_id)
            if entry is None:
                logger.warning("Dropping unresolved add-on %s", selection.addon_id)
                continue

            nights_applied = nights if entry.per_night else 1
            lines.append(
                AddonLine(
                    addon_id=entry.id,
                    name=entry.name,
                    quantity=selection.quantity,
                    unit_price_cents=entry.price_cents,
                    nights_applied=nights_applied,
                    line_total_cents=entry.price_cents * nights_applied * selection.quantity,
                )
            )
        return lines

    def total_cents(self, selections: Sequence[AddonSelection], nights: int) -> int:
        """Sum of all resolved add-on lines."""
        return sum(line.line_total_cents for line in self.line_items(selections, nights))
