from imageresizer.middleware.cors import wildcard_origin_middleware
from imageresizer.middleware.request_id import request_id_middleware
from imageresizer.middleware.error_handler import error_envelope_middleware

__all__ = ["wildcard_origin_middleware", "request_id_middleware", "error_envelope_middleware"]
