"""
Configuration carried by a DataFrame.

``SchemaOptions`` controls how a schema is derived on construction. ``FrameConfig`` holds the
rollup pipeline state accumulated by ``group_by``/``summarize``/``align``/``using`` and the
names of the fields a rollup writes.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from ..engine.rollup import Summary
from ..exceptions import ConfigurationError
from ..schema.metadata import DEFAULT_CURRENCY_SUFFIX, DEFAULT_SEPARATOR

DEFAULT_CHILDREN = "children"
DEFAULT_ACTUAL_FLAG = "actual_flag"

OVERRIDABLE = ("children", "actual_flag")


@dataclass
class SchemaOptions:
    metadata: Optional[List[Any]] = None
    deep_scan: bool = False
    path: Optional[str] = None
    separator: str = DEFAULT_SEPARATOR
    currency_suffix: str = DEFAULT_CURRENCY_SUFFIX

    def to_kwargs(self) -> Dict[str, Any]:
        return {
            "metadata": self.metadata,
            "deep_scan": self.deep_scan,
            "path": self.path,
            "separator": self.separator,
            "currency_suffix": self.currency_suffix,
        }


@dataclass
class FrameConfig:
    """Rollup pipeline state.

    Attributes:
        group_by: Ordered group-by column names
        align_by: Columns whose value combinations every group must cover
        template: Default values for rows synthesized during alignment
        summaries: Summaries registered through ``summarize``
        children: Field holding nested rows when no summary is registered
        actual_flag: Field marking genuine (1) versus synthesized (0) rows after alignment
    """

    group_by: List[str] = field(default_factory=list)
    align_by: List[str] = field(default_factory=list)
    template: Dict[str, Any] = field(default_factory=dict)
    summaries: List[Summary] = field(default_factory=list)
    children: str = DEFAULT_CHILDREN
    actual_flag: str = DEFAULT_ACTUAL_FLAG

    def override(self, **changes: Any) -> None:
        unknown = sorted(set(changes) - set(OVERRIDABLE))
        if unknown:
            raise ConfigurationError(
                f"Cannot override {unknown}; only {list(OVERRIDABLE)} can be overridden"
            )
        for key, value in changes.items():
            if not isinstance(value, str) or not value:
                raise ConfigurationError(f"{key} must be a non-empty field name")
            setattr(self, key, value)

    def reset_pipeline(self) -> None:
        """Forget group-by keys, alignment, template and summaries."""
        self.group_by = []
        self.align_by = []
        self.template = {}
        self.summaries = []
