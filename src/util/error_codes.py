# Validation (1000-1999)
MALFORMED_UPDATE = 1001
UPDATE_TOO_DEEP = 1002
INVALID_POLLING_LIMIT = 1003
INVALID_POLLING_TIMEOUT = 1004

# Not Found (2000-2999)
NO_HANDLER_MATCHED = 2001

# External Service (5000-5999)
REMOTE_API_FAILED = 5001
INVALID_API_RESPONSE = 5002

# Configuration (7000-7999)
INVALID_CURSOR_STORE = 7001

# Internal (8000-8999)
HANDLER_FAILED = 8001
