"""Order acceptance reconciliation exports."""

from .service import reconcile, unwrap_accept_response

__all__ = ["reconcile", "unwrap_accept_response"]
