from dataclasses import dataclass
from typing import Optional, Dict, Any
from fastapi import HTTPException

from ..ports.account_repo import AccountDto
from .credential_store import CredentialStore, PROFILE_FIELDS


@dataclass
class ProfileService:
    credentials: CredentialStore

    def update_profile(self, account_id: str, fields: Dict[str, Any]) -> Optional[AccountDto]:
        updates = {k: v for k, v in fields.items() if k in PROFILE_FIELDS}
        if not updates:
            raise HTTPException(status_code=400, detail="At least one field is required")
        for key in ("full_name", "company_name", "phone_number"):
            if key in updates and not (updates[key] or "").strip():
                raise HTTPException(status_code=400, detail=f"{key} cannot be empty")
        return self.credentials.update_profile(account_id, updates)

    def update_photo(self, account_id: str, photo_ref: Optional[str]) -> Optional[AccountDto]:
        return self.credentials.update_photo(account_id, photo_ref)
