"""PC build selection, compatibility rules and share codes.

A build holds at most one component per category. Compatibility is checked
with a small set of rules:

    ERROR    the build will not work (socket or memory mismatch, PSU too small)
    WARNING  the build works but is risky (thin PSU headroom, no CPU cooler)
    INFO     the build is incomplete (missing categories)

Power draw is estimated as CPU TDP + GPU TDP + a fixed allowance for the rest
of the platform; the recommended PSU rating adds 20% headroom on top.
"""

import base64
import binascii
import json
from dataclasses import dataclass
from enum import Enum

from cirkit.domain.pc_build.catalog import (
    CATEGORY_IDS,
    ComponentCatalog,
    PCComponent,
)
from cirkit.shared.exceptions import ValidationError

PLATFORM_WATTS = 75
PSU_HEADROOM = 1.20


class Severity(str, Enum):
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


@dataclass(frozen=True)
class CompatibilityIssue:
    severity: Severity
    message: str
    components: tuple[str, ...] = ()

    def to_dict(self) -> dict:
        return {
            "severity": self.severity.value,
            "message": self.message,
            "components": list(self.components),
        }


class PCBuild:
    """Mutable selection of at most one component per category."""

    def __init__(self, selected: dict[str, PCComponent] | None = None) -> None:
        self._selected: dict[str, PCComponent] = dict(selected or {})

    @property
    def selected(self) -> dict[str, PCComponent]:
        return dict(self._selected)

    def get(self, category: str) -> PCComponent | None:
        return self._selected.get(category)

    def toggle(self, component: PCComponent) -> None:
        """Select a component, or deselect it if it is already selected."""
        current = self._selected.get(component.category)
        if current is not None and current.id == component.id:
            del self._selected[component.category]
        else:
            self._selected[component.category] = component

    def clear(self) -> None:
        self._selected.clear()

    @property
    def total_price(self) -> int:
        return sum(component.price for component in self._selected.values())

    @property
    def selected_count(self) -> int:
        return len(self._selected)

    @property
    def is_complete(self) -> bool:
        return all(category in self._selected for category in CATEGORY_IDS)

    def estimated_draw(self) -> int:
        """Estimated peak draw in watts (0 when neither CPU nor GPU is picked)."""
        tdps = [
            component.tdp or 0
            for category in ("processor", "graphics")
            if (component := self._selected.get(category)) is not None
        ]
        if not tdps:
            return 0
        return sum(tdps) + PLATFORM_WATTS

    def check_compatibility(self) -> list[CompatibilityIssue]:
        issues: list[CompatibilityIssue] = []
        cpu = self._selected.get("processor")
        board = self._selected.get("motherboard")
        ram = self._selected.get("memory")
        psu = self._selected.get("psu")
        case = self._selected.get("case")
        cooler = self._selected.get("cooling")

        if cpu and board and cpu.socket and board.socket and cpu.socket != board.socket:
            issues.append(
                CompatibilityIssue(
                    Severity.ERROR,
                    f"{cpu.name} ({cpu.socket}) does not fit {board.name} ({board.socket})",
                    (cpu.id, board.id),
                )
            )

        if (
            ram
            and board
            and ram.memory_type
            and board.memory_type
            and ram.memory_type != board.memory_type
        ):
            issues.append(
                CompatibilityIssue(
                    Severity.ERROR,
                    f"{board.name} supports {board.memory_type}, not {ram.memory_type}",
                    (ram.id, board.id),
                )
            )

        if case and board and board.form_factor and case.supported_form_factors:
            if board.form_factor not in case.supported_form_factors:
                issues.append(
                    CompatibilityIssue(
                        Severity.ERROR,
                        f"{case.name} does not fit a {board.form_factor} motherboard",
                        (case.id, board.id),
                    )
                )

        if cooler and cpu and cpu.socket and cooler.supported_sockets:
            if cpu.socket not in cooler.supported_sockets:
                issues.append(
                    CompatibilityIssue(
                        Severity.ERROR,
                        f"{cooler.name} has no mounting kit for {cpu.socket}",
                        (cooler.id, cpu.id),
                    )
                )

        draw = self.estimated_draw()
        if psu and psu.wattage and draw:
            recommended = round(draw * PSU_HEADROOM)
            if psu.wattage < draw:
                issues.append(
                    CompatibilityIssue(
                        Severity.ERROR,
                        f"{psu.name} ({psu.wattage}W) is below the estimated draw of {draw}W",
                        (psu.id,),
                    )
                )
            elif psu.wattage < recommended:
                issues.append(
                    CompatibilityIssue(
                        Severity.WARNING,
                        f"{psu.name} ({psu.wattage}W) leaves little headroom; "
                        f"{recommended}W or more is recommended",
                        (psu.id,),
                    )
                )

        if cpu and not cpu.includes_cooler and cooler is None:
            issues.append(
                CompatibilityIssue(
                    Severity.WARNING,
                    f"{cpu.name} ships without a cooler; add one from Cooling",
                    (cpu.id,),
                )
            )

        missing = [category for category in CATEGORY_IDS if category not in self._selected]
        if missing:
            issues.append(
                CompatibilityIssue(Severity.INFO, "Missing components: " + ", ".join(missing))
            )

        return issues

    def has_errors(self) -> bool:
        return any(issue.severity is Severity.ERROR for issue in self.check_compatibility())

    def encode_share_code(self) -> str:
        """URL-safe code that restores this selection via ``from_share_code``."""
        payload = {
            category: self._selected[category].id
            for category in CATEGORY_IDS
            if category in self._selected
        }
        raw = json.dumps(payload, separators=(",", ":")).encode("utf-8")
        return base64.urlsafe_b64encode(raw).decode("ascii").rstrip("=")

    @classmethod
    def from_share_code(cls, code: str, catalog: ComponentCatalog) -> "PCBuild":
        """Rebuild a selection from a share code.

        Ids the catalog no longer knows, or that sit under the wrong category,
        are skipped.

        Raises:
            ValidationError: The code is not a valid share code.
        """
        padded = code.strip() + "=" * (-len(code.strip()) % 4)
        try:
            data = json.loads(base64.urlsafe_b64decode(padded.encode("ascii")))
        except (binascii.Error, UnicodeError, ValueError) as e:
            raise ValidationError("Invalid share code", {"code": code}) from e
        if not isinstance(data, dict):
            raise ValidationError("Invalid share code", {"code": code})

        build = cls()
        for category, component_id in data.items():
            if not isinstance(component_id, str):
                continue
            component = catalog.get(component_id)
            if component is None or component.category != category:
                continue
            build.toggle(component)
        return build

    @classmethod
    def from_ids(cls, component_ids: list[str], catalog: ComponentCatalog) -> "PCBuild":
        """Select the given ids; a later id replaces an earlier one in its category.

        Raises:
            ValidationError: An id is not in the catalog.
        """
        build = cls()
        for component_id in component_ids:
            component = catalog.get(component_id)
            if component is None:
                raise ValidationError(
                    "Unknown component", {"component_id": component_id}
                )
            build._selected[component.category] = component
        return build
