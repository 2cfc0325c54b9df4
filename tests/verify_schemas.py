import sys
import os
import traceback

# Add project root to path
sys.path.append(os.getcwd())

print("Starting schema verification...")

try:
    from app import schemas
    print("Schemas package imported successfully.")

    # Try instantiating a few to check for runtime errors in definitions
    from pydantic import ValidationError

    try:
        user = schemas.UserCreate(email="test@example.com", password="password", display_name="Test User")
        print(f"UserCreate schema valid: {user}")
    except ValidationError as e:
        print(f"UserCreate validation failed: {e}")

    try:
        booking = schemas.BookingPaymentCreate.model_validate({
            "venueId": "3f1c0d1e-8a7b-4c6d-9e5f-1a2b3c4d5e6f",
            "bookingDate": "2026-01-01",
            "bookingTime": "19:00",
            "amountCents": 2500,
        })
        print(f"BookingPaymentCreate schema valid: {booking}")
    except ValidationError as e:
        print(f"BookingPaymentCreate validation failed: {e}")

    try:
        schemas.HiddenGemCreate(name="Secret Garden", description="A quiet courtyard.", address="4 Library Lane")
        print("FAILURE: HiddenGemCreate accepted a submission without a location.")
        sys.exit(1)
    except ValidationError:
        print("HiddenGemCreate rejects submissions without a location.")

    print("SUCCESS: Schemas verified.")

except Exception:
    print("FAILURE: Schema verification failed.")
    traceback.print_exc()
    sys.exit(1)
