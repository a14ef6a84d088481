"""Response schemas for Gemini structured output."""

from functools import lru_cache
from typing import Any, Dict

# Keys Gemini's responseSchema rejects, or that only carry Pydantic metadata
_DROPPED_KEYS = (
    "additionalProperties", "additional_properties", "title", "description",
    "examples", "example", "$defs", "default", "minLength", "minItems",
    "maxLength", "maxItems", "minimum", "maximum",
)

INGREDIENT_LIST_SCHEMA: Dict[str, Any] = {
    "type": "array",
    "items": {"type": "string"},
}


def clean_schema_for_gemini(schema: Dict[str, Any]) -> Dict[str, Any]:
    """
    Clean Pydantic JSON schema for Gemini responseSchema format.
    - Resolves $ref references to their definitions (Gemini doesn't support $ref)
    - Drops metadata and constraint keywords (see _DROPPED_KEYS)
    - Handles anyOf for Optional fields (extracts the non-null type)
    """
    defs = schema.get("$defs", {})

    def resolve_ref(ref: str) -> Dict[str, Any]:
        if ref.startswith("#/$defs/"):
            return defs.get(ref[len("#/$defs/"):], {})
        return {}

    def clean(s: Any) -> Any:
        if not isinstance(s, dict):
            return s

        if "$ref" in s:
            return clean(resolve_ref(s["$ref"]))

        result: Dict[str, Any] = {}
        for key, value in s.items():
            if key in _DROPPED_KEYS:
                continue
            if key == "properties" and isinstance(value, dict):
                # property names are data here, never metadata
                result[key] = {name: clean(prop) for name, prop in value.items()}
            elif isinstance(value, dict):
                result[key] = clean(value)
            elif isinstance(value, list):
                result[key] = [clean(item) for item in value]
            else:
                result[key] = value

        if "anyOf" in result:
            any_of = result.pop("anyOf")
            for option in any_of:
                if isinstance(option, dict) and option.get("type") != "null":
                    result.update(option)
                    break

        return result

    return clean(schema)


@lru_cache(maxsize=2)
def get_recipe_list_schema(strict: bool = False) -> Dict[str, Any]:
    """
    Array-of-recipes schema for the generation call, cached.

    The strict variant additionally requires cuisineType and chefTips.
    """
    from app.models.recipe import RecipeDraft

    item = clean_schema_for_gemini(RecipeDraft.model_json_schema())
    if strict:
        item["required"] = list(item.get("required", [])) + ["cuisineType", "chefTips"]
    return {"type": "array", "items": item}
