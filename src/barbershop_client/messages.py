"""User-facing strings shown by the client (Uzbek locale)."""

LOADING = "Yuklanmoqda..."
NOT_FOUND = "Sahifa topilmadi"

LOGIN_FAILED = "Kirish muvaffaqiyatsiz. Iltimos, ma'lumotlarni tekshiring."
REGISTER_FAILED = "Ro'yxatdan o'tish muvaffaqiyatsiz. Iltimos, qayta urinib ko'ring."
NETWORK_ERROR = (
    "Tarmoq xatosi. Iltimos, internet aloqangizni tekshiring va qayta urinib ko'ring."
)

LOAD_BOOKINGS_FAILED = "Bronlarni yuklash muvaffaqiyatsiz"
LOAD_CATALOG_FAILED = "Xizmatlar va barberlarni yuklash muvaffaqiyatsiz"
APPROVE_FAILED = "Bronni tasdiqlash muvaffaqiyatsiz"
REJECT_FAILED = "Bronni rad etish muvaffaqiyatsiz"
STATUS_UPDATE_FAILED = "Bron holatini yangilash muvaffaqiyatsiz"
BOOKING_CREATED = "Bron muvaffaqiyatli yaratildi!"


def booking_failed(status_code: int) -> str:
    """Fallback shown when a booking submission is rejected without a message."""
    return (
        f"Bron qilish muvaffaqiyatsiz ({status_code}). "
        "Iltimos, qayta urinib ko'ring."
    )
