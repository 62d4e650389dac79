STORE_BACKENDS = ("local", "supabase")

# Labels stored by the first, Spanish-language version of the app
LEGACY_STATUS_LABELS = {
    "Pendiente": "Pending",
    "Ganado": "Won",
    "Perdido": "Lost",
}

DATE_FORMAT = "%Y-%m-%d"
TIME_FORMATS = ("%H:%M", "%H:%M:%S")

WEEKDAY_LABELS = ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]
CALENDAR_CELLS = 42

__all__ = [
    "STORE_BACKENDS", "LEGACY_STATUS_LABELS", "DATE_FORMAT", "TIME_FORMATS",
    "WEEKDAY_LABELS", "CALENDAR_CELLS"]
