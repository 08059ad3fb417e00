from asgiref.sync import async_to_sync
from django.core.management.base import BaseCommand

from clinic.backend import get_client_factory
from clinic.services.auth import SignUpData, sign_up
from clinic.services.provider_auth import ProviderSignUpData, provider_sign_up

DEMO_PASSWORD = "Demo@12345"

DEMO_PATIENT = SignUpData(
    email="patient.demo@teleheal.test",
    phone="0240000001",
    password=DEMO_PASSWORD,
    full_name="Demo Patient",
)
DEMO_PROVIDER = ProviderSignUpData(
    email="provider.demo@teleheal.test",
    phone="0240000002",
    password=DEMO_PASSWORD,
    full_name="Demo Provider",
    license_number="LIC-DEMO01",
    specialization="General Practice",
    years_of_experience=5,
)


class Command(BaseCommand):
    help = "Sign up a demo patient and a demo provider (already registered accounts are reported, not changed)."

    def handle(self, *args, **opts):
        async def run():
            client = await get_client_factory()()
            return [
                (DEMO_PATIENT.email, "patient", await sign_up(client, DEMO_PATIENT)),
                (DEMO_PROVIDER.email, "provider", await provider_sign_up(client, DEMO_PROVIDER)),
            ]

        for email, role, result in async_to_sync(run)():
            if result["success"]:
                self.stdout.write(self.style.SUCCESS(f"ok: {email} ({role})"))
            else:
                self.stdout.write(self.style.WARNING(f"skipped: {email} ({role}): {result['error']}"))
        self.stdout.write(self.style.SUCCESS("Demo accounts ensured."))
