from membership.models import Accountability

from .records import build_record_router

router = build_record_router(Accountability, "/accountability", "accountability record")
