"""
Provider directory: profile, licence verification, weekly availability,
appointments, consultations and rating.
"""
from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import List, Optional

from clinic.services.envelope import first_row, ok, service_call
from clinic.services.provider_auth import PROVIDER_PROFILES_TABLE

AVAILABILITY_TABLE = 'provider_availability'
REVIEWS_TABLE = 'provider_reviews'


@dataclass
class ProviderProfileUpdate:
    """Fields a provider may change on their own profile."""
    specialization: Optional[str] = None
    license_number: Optional[str] = None
    years_of_experience: Optional[int] = None
    bio: Optional[str] = None
    is_active: Optional[bool] = None

    def as_row(self) -> dict:
        row = {k: v for k, v in asdict(self).items() if v is not None}
        if not row:
            raise ValueError('Nothing to update')
        return row


@dataclass
class AvailabilitySlot:
    day_of_week: int
    start_time: str
    end_time: str
    is_available: bool = True


def average_rating(ratings: List[float]) -> float:
    if not ratings:
        return 0
    return round(sum(ratings) / len(ratings), 1)


@service_call
async def get_provider_profile(client, user_id: str) -> dict:
    response = await client.table(PROVIDER_PROFILES_TABLE).select('*').eq('user_id', user_id).single().execute()
    return ok(response.data)


@service_call
async def update_provider_profile(client, user_id: str, updates: ProviderProfileUpdate) -> dict:
    response = await client.table(PROVIDER_PROFILES_TABLE).update(updates.as_row()).eq('user_id', user_id).execute()
    return ok(first_row(response))


@service_call
async def verify_provider_license(client, user_id: str, license_number: str) -> dict:
    """Mark the provider as verified.

    No external licence registry is consulted; the licence number must match
    the one on file for the row to be updated.
    """
    response = await (
        client.table(PROVIDER_PROFILES_TABLE)
        .update({'is_verified': True})
        .eq('user_id', user_id)
        .eq('license_number', license_number)
        .execute()
    )
    return ok(first_row(response))


@service_call
async def get_provider_availability(client, provider_id: str) -> dict:
    response = await (
        client.table(AVAILABILITY_TABLE)
        .select('*')
        .eq('provider_id', provider_id)
        .order('day_of_week')
        .execute()
    )
    return ok(response.data)


@service_call
async def update_provider_availability(client, provider_id: str, slots: List[AvailabilitySlot]) -> dict:
    """Replace the provider's weekly availability with ``slots``."""
    await client.table(AVAILABILITY_TABLE).delete().eq('provider_id', provider_id).execute()
    if not slots:
        return ok([])
    response = await client.table(AVAILABILITY_TABLE).insert([
        {'provider_id': provider_id, **asdict(slot)} for slot in slots
    ]).execute()
    return ok(response.data)


@service_call
async def get_provider_appointments(client, provider_id: str) -> dict:
    response = await (
        client.table('appointments')
        .select('*')
        .eq('provider_id', provider_id)
        .order('appointment_date')
        .execute()
    )
    return ok(response.data)


@service_call
async def get_provider_consultations(client, provider_id: str) -> dict:
    response = await (
        client.table('consultations')
        .select('*')
        .eq('provider_id', provider_id)
        .order('start_time', desc=True)
        .execute()
    )
    return ok(response.data)


@service_call
async def get_provider_rating(client, provider_id: str) -> dict:
    response = await client.table(REVIEWS_TABLE).select('rating').eq('provider_id', provider_id).execute()
    ratings = [r['rating'] for r in (response.data or []) if r.get('rating') is not None]
    return ok({'averageRating': average_rating(ratings), 'totalReviews': len(ratings)})
