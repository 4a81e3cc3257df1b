from typing import Any, Dict


def to_user_out(doc: Dict[str, Any]) -> Dict[str, Any]:
    """
    Normalize a user document into the public API shape.
    The password hash never leaves the service layer.
    """
    return {
        "id": doc["_id"],
        "name": doc.get("name") or "",
        "email": doc.get("email") or "",
        "role": doc.get("role", "citizen"),
        "department_id": doc.get("department_id"),
        "national_id": doc.get("national_id"),
        "dob": doc.get("dob"),
        "contact_info": doc.get("contact_info"),
        "created_at": doc.get("created_at"),
    }
