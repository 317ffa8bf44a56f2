"""
Animal ingestion and lookups.

create_animal runs authenticate -> parse -> validate -> persist and stops at the
first failing step. Nothing is written unless every step before persisting passed.
"""

import json
import logging
from typing import Any, Dict, List, Optional, Tuple, Union

from pydantic import ValidationError

from auth import AuthVerifier
from schemas import Animal, AnimalInput
from storage import RecordStore
from validation import validate_animal

logger = logging.getLogger(__name__)

Result = Tuple[bool, Dict[str, str]]


def _reject_constant(name: str):
    # NaN and Infinity are not JSON
    raise ValueError(f"invalid JSON constant: {name}")


def _parse_json(text: str) -> Any:
    candidate = json.loads(text, parse_constant=_reject_constant)
    # unpaired \uD800-\uDFFF escapes parse fine but cannot be stored as UTF-8
    json.dumps(candidate, ensure_ascii=False).encode("utf-8")
    return candidate


class AnimalService:
    def __init__(self, store: RecordStore, verifier: AuthVerifier, collection: str = "animals"):
        self.store = store
        self.verifier = verifier
        self.collection = collection

    async def create_animal(self, credential: Optional[str], raw_json_text: str) -> Result:
        """Validate raw_json_text and store it as an animal owned by the credential's user.

        The credential is resolved to a user id once, before the body is parsed.
        A signed credential that carries no usable identity therefore raises
        IdentityResolutionError even when the body is not valid JSON.
        """
        user_id = await self.verifier.authenticate(credential)
        if not user_id:
            logger.warning("Rejected animal creation: unauthorized")
            return False, {"error": "Unauthorized"}

        try:
            candidate = _parse_json(raw_json_text)
        except (TypeError, ValueError, RecursionError):
            logger.info("Rejected animal creation: invalid JSON", extra={"user_id": user_id})
            return False, {"error": "Invalid JSON string"}

        valid, error = validate_animal(candidate)
        if not valid:
            logger.info(f"Rejected animal creation: {error}", extra={"user_id": user_id})
            return False, {"error": error}

        animal = AnimalInput.model_validate(candidate)
        record = {**animal.model_dump(), "createdByUser": user_id}
        animal_id = await self.store.insert_record(self.collection, record)

        logger.info("Animal created", extra={"animal_id": animal_id, "user_id": user_id})
        return True, {"success": "Animal created", "id": animal_id}

    async def get_all_animals(self) -> List[Animal]:
        animals = []
        for record in await self.store.list_records(self.collection):
            try:
                animals.append(Animal.model_validate(record))
            except ValidationError as e:
                logger.warning(
                    f"Skipping malformed stored animal: {e.error_count()} error(s)",
                    extra={"collection": self.collection},
                )
        return animals

    async def get_one_animal(self, animal_id: str) -> Tuple[bool, Union[Animal, Dict[str, str]]]:
        for animal in await self.get_all_animals():
            if animal.id == animal_id:
                return True, animal
        return False, {"error": "Animal not found"}

    async def get_animals_by_user(self, user_id: str) -> Tuple[bool, Union[List[Animal], Dict[str, Any]]]:
        animals = [a for a in await self.get_all_animals() if a.createdByUser == user_id]
        if not animals:
            return False, {"error": "No animals found"}
        return True, animals
