"""Supplier and customer contacts."""

from __future__ import annotations

import logging
from dataclasses import replace
from datetime import datetime
from typing import Any, Callable, Optional, Union

from src.errors import ValidationError
from src.models.business import Contact, ContactType
from src.services.validator import validate_contact_form
from src.store import Action, ActionType, AppStore
from src.utils.calculations import generate_id

logger = logging.getLogger(__name__)

_EDITABLE_FIELDS = {"name", "phone", "type", "email", "address"}


class ContactService:
    def __init__(
        self,
        store: AppStore,
        clock: Callable[[], datetime] = datetime.now,
        id_factory: Callable[[], str] = generate_id,
    ):
        self._store = store
        self._clock = clock
        self._id_factory = id_factory

    def add_contact(
        self,
        name: str,
        phone: str,
        contact_type: Union[ContactType, str],
        email: Optional[str] = None,
        address: Optional[str] = None,
    ) -> Contact:
        result = validate_contact_form(name, phone, contact_type)
        if not result.is_valid:
            raise ValidationError(result.message)

        contact = Contact(
            id=self._id_factory(),
            name=name.strip(),
            phone=phone.strip(),
            type=ContactType(contact_type),
            email=email or None,
            address=address or None,
            created_at=self._clock(),
        )
        self._store.dispatch(Action(ActionType.ADD_CONTACT, contact))
        logger.info("Contact added: %s (%s)", contact.name, contact.type.value)
        return contact

    def update_contact(self, contact_id: str, **changes: Any) -> Contact:
        unknown = set(changes) - _EDITABLE_FIELDS
        if unknown:
            raise ValidationError(f"Unknown fields: {', '.join(sorted(unknown))}")
        if "type" in changes:
            try:
                changes["type"] = ContactType(changes["type"])
            except ValueError:
                raise ValidationError(f"Invalid contact type: {changes['type']}")

        with self._store.transaction():
            current = self.get_contact(contact_id)
            if current is None:
                raise ValidationError(f"Contact not found: {contact_id}")

            updated = replace(current, **changes)
            result = validate_contact_form(updated.name, updated.phone, updated.type)
            if not result.is_valid:
                raise ValidationError(result.message)

            self._store.dispatch(Action(ActionType.UPDATE_CONTACT, updated))
        return updated

    def delete_contact(self, contact_id: str) -> None:
        self._store.dispatch(Action(ActionType.DELETE_CONTACT, contact_id))

    def get_contact(self, contact_id: str) -> Optional[Contact]:
        for contact in self._store.state.contacts:
            if contact.id == contact_id:
                return contact
        return None

    def list_contacts(
        self, contact_type: Optional[Union[ContactType, str]] = None, search: Optional[str] = None
    ) -> list[Contact]:
        contacts = list(self._store.state.contacts)
        if contact_type:
            wanted = ContactType(contact_type)
            contacts = [c for c in contacts if c.type == wanted]
        if search:
            needle = search.lower()
            contacts = [c for c in contacts if needle in c.name.lower() or needle in c.phone]
        return contacts
