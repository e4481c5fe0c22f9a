"""Reply header composition."""

import logging
from dataclasses import dataclass
from typing import List, Optional, Tuple

from iotexec.modules.headers.properties import HeaderProperties

logger = logging.getLogger(__name__)

SOURCE = "exec"
MESSAGE_TYPE = "cmdresp"

SCRATCH_BUFFER_SIZE = 8192
"""Space available for the composed header blob, terminator included."""


@dataclass(frozen=True)
class ResponseHeaders:
    """Headers attached to one device-to-cloud command response."""

    correlation_id: Optional[str] = None
    source: str = SOURCE
    message_type: str = MESSAGE_TYPE

    def fields(self) -> List[Tuple[str, str]]:
        fields = [("source", self.source), ("messagetype", self.message_type)]
        if self.correlation_id is not None:
            fields.append(("correlationId", self.correlation_id))
        return fields

    def render(self) -> str:
        return HeaderProperties(self.fields()).render()


def build_response_headers(
    correlation_id: Optional[str] = None,
    scratch_size: int = SCRATCH_BUFFER_SIZE,
) -> str:
    """
    Build the header blob for a command response.

    Args:
        correlation_id: Inbound messageId to echo back, if any
        scratch_size: Bytes available for the composed blob

    Returns:
        Header blob. If the blob with the correlation id does not fit in
        `scratch_size`, the headers are returned without it.
    """
    base = ResponseHeaders()
    if correlation_id is None:
        return base.render()

    headers = ResponseHeaders(correlation_id=correlation_id).render()
    if len(headers.encode("utf-8")) >= scratch_size:
        logger.warning(
            f"Response headers exceed {scratch_size} bytes, dropping correlation id"
        )
        return base.render()

    return headers
