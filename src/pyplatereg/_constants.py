"""Internal constants shared across the library."""

BASE_URL = "http://localhost:5000"
USER_AGENT = "pyplatereg"

# ------------------------------------------------------------------
# Persistence endpoints
# ------------------------------------------------------------------

LOT_CONFIG_ENDPOINT = "/get-lot"
REGISTRY_ROWS_ENDPOINT = "/get-vehicle-registry"
COMMIT_ROWS_ENDPOINT = "/update-vehicle-registry"
COMMIT_LOT_ENDPOINT = "/update-lot"

# ------------------------------------------------------------------
# Registry rows
# ------------------------------------------------------------------

#: Editable text fields of a registry row, in display order.
ROW_FIELDS: tuple[str, ...] = ("plate", "name", "email", "phone")

PLACEHOLDER_PREFIX = "PL_"

MIN_PHONE_DIGITS = 7
