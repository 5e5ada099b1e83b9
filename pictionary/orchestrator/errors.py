# Error codes carried in results and API responses
ERR_PERMISSION_DENIED = "PERMISSION_DENIED"
ERR_UNSUPPORTED_LANGUAGE = "UNSUPPORTED_LANGUAGE"
ERR_NOT_READY = "NOT_READY"

# Translation failures, all shown to the user as the same fallback text
ERR_TRANSPORT = "TRANSPORT_ERROR"
ERR_HTTP_STATUS = "HTTP_STATUS"
ERR_EMPTY_RESPONSE = "EMPTY_RESPONSE"
ERR_BAD_RESPONSE = "BAD_RESPONSE"
