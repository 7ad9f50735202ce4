"""
Characteristic expansion.

Turns a part's characteristic templates into the concrete characteristics an
Auditor measures. "3x 5.0 ± 0.1" on "Hole Diameter" becomes
"Hole Diameter (1)", "Hole Diameter (2)", "Hole Diameter (3)".
"""
from typing import List

from qc_inspection.schemas.part import CharacteristicSpec, Part
from qc_inspection.schemas.report import Characteristic, blank_observations
from qc_inspection.services.specification_parser import parse_repeat


def expand_characteristic(spec: CharacteristicSpec) -> List[Characteristic]:
    """Expand one template into one or more characteristics."""
    template = parse_repeat(spec.specification)
    if template is None:
        return [
            Characteristic(
                name=spec.name,
                specification=spec.specification,
                check_method=spec.check_method,
                observations=blank_observations(),
            )
        ]

    return [
        Characteristic(
            name=f"{spec.name} ({index})",
            specification=template.specification,
            check_method=spec.check_method,
            observations=blank_observations(),
        )
        for index in range(1, template.count + 1)
    ]


def expand(part: Part) -> List[Characteristic]:
    """
    Expand every characteristic template of a part, preserving order.

    Called once when an Auditor starts a report. Submitted reports keep their
    own snapshot and are never re-expanded.
    """
    characteristics: List[Characteristic] = []
    for spec in part.characteristics:
        characteristics.extend(expand_characteristic(spec))
    return characteristics
