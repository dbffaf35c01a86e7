from datetime import datetime
from typing import Annotated

from pydantic import AfterValidator

from coursehub.core.clock import as_utc

# SQLite hands stored values back naive; they are always UTC
UtcDatetime = Annotated[datetime, AfterValidator(as_utc)]
