"""HubSpot property mappings for contact writes.

Maps internal ContactProperties field names to the HubSpot contact property
names configured in the portal. Only this table needs to change if the portal
renames a custom property.
"""

from __future__ import annotations

from src.call_sync.sync.schemas import ContactProperties

HUBSPOT_PROPERTY_MAP: dict[str, str] = {
    "phone": "phone",
    "first_name": "firstname",
    "status_label": "status_ultima_ligacao",
    "recording_link": "ultima_gravacao_3c",
    "contacted": "lead_contatado_",
    "last_success_at": "ultimo_contato_feito_em",
    "last_failure_at": "ultimo_contato_sem_sucesso",
}


def to_hubspot_properties(
    properties: ContactProperties,
    property_map: dict[str, str] | None = None,
) -> dict[str, str]:
    """Convert a ContactProperties model to the HubSpot ``properties`` payload.

    Unset fields are dropped so the write is a merge. Booleans are sent as
    the strings HubSpot expects for checkbox properties.
    """
    if property_map is None:
        property_map = HUBSPOT_PROPERTY_MAP

    payload: dict[str, str] = {}
    for field_name, value in properties.model_dump(exclude_none=True).items():
        if field_name not in property_map:
            continue
        if isinstance(value, bool):
            value = "true" if value else "false"
        payload[property_map[field_name]] = str(value)
    return payload
