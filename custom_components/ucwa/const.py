"""Constants for ucwa."""

DOMAIN = "ucwa"
MANUFACTURER = "Microsoft"
MODEL = "Unified Communications Web API"

CONF_CONTACTS = "contacts"

DATA_HUB = "hub"
DATA_COORDINATOR = "coordinator"

ONLINE_AVAILABILITY = "Online"
RECONNECT_MAX_DELAY = 300
