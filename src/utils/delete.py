from typing import Any, Dict


def create_delete_response(resource_id: str, kind: str) -> Dict[str, Any]:
    """Confirmation body returned by DELETE endpoints."""
    return {
        "id": resource_id,
        "object": f"{kind}.deleted",
        "deleted": True,
    }
