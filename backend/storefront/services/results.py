from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from storefront.models.cart import Cart


@dataclass
class CartResult:
    """
    Uniform outcome of every cart engine entry point. Engines never raise to
    their caller; a failure is `success=False` plus user-safe `errors`.
    """

    success: bool
    cart: Optional[Cart] = None
    resource: Any = None
    errors: List[str] = field(default_factory=list)
    metadata: Dict[str, Any] = field(default_factory=dict)

    @property
    def failure(self) -> bool:
        return not self.success

    @property
    def error_type(self) -> Optional[str]:
        return self.metadata.get("error_type")

    @property
    def merged_line_count(self) -> int:
        return self.metadata.get("merged_line_count", 0)

    @property
    def merged_any(self) -> bool:
        return self.merged_line_count > 0

    @property
    def cleared_line_count(self) -> int:
        return self.metadata.get("cleared_line_count", 0)

    @property
    def cleared_variants(self) -> list:
        return self.metadata.get("cleared_variants", [])

    @classmethod
    def ok(cls, cart=None, resource=None, **metadata) -> "CartResult":
        return cls(True, cart=cart, resource=resource, metadata=metadata)

    @classmethod
    def fail(cls, errors, cart=None, **metadata) -> "CartResult":
        return cls(False, cart=cart, errors=list(errors), metadata=metadata)
