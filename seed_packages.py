from novalgo.main import create_app
from novalgo.services.investment_service import DEFAULT_PACKAGES, seed_default_packages

# -------------------------------------------------------------------
# Seeds the Lite / Pro / Elite catalog. Safe to re-run: existing
# package types are left untouched.
# -------------------------------------------------------------------

app = create_app()

with app.app_context():
    created = seed_default_packages()
    print(f"Seeded {created} package(s); catalog has {len(DEFAULT_PACKAGES)} types")
