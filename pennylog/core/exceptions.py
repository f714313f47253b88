from typing import Any, Dict, List, Optional


class ValidationError(ValueError):
    """Raised when an expense record cannot be used for analysis.

    ``index`` is the position of the offending record in the batch that was
    supplied, ``errors`` the field-level problems found on it.
    """

    def __init__(
        self,
        message: str,
        index: Optional[int] = None,
        errors: Optional[List[Dict[str, Any]]] = None,
    ) -> None:
        super().__init__(message)
        self.index = index
        self.errors = errors or []

    def to_dict(self) -> Dict[str, Any]:
        return {"detail": str(self), "index": self.index, "errors": self.errors}


class RuleTableError(ValueError):
    """Raised when the category rule table cannot be loaded."""
