# topmark:header:start
#
#   project      : MarcPipe
#   file         : marc21.py
#   file_relpath : src/marcpipe/core/marc21.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Reserved MARC 21 event names and MARCXML schema constants.

Stages that produce or consume MARC 21 shaped event streams agree on these
names. A literal (or entity) named `LEADER_ENTITY` carries the record leader;
a record-level literal named `MARCXML_TYPE_LITERAL` carries the value of the
``type`` attribute of the MARCXML ``record`` element.
"""

from __future__ import annotations

from typing import Final

LEADER_ENTITY: Final[str] = "leader"
MARCXML_TYPE_LITERAL: Final[str] = "type"

# Data field entity names are "<tag><ind1><ind2>", e.g. "24510".
DATAFIELD_ENTITY_LENGTH: Final[int] = 5
TAG_LENGTH: Final[int] = 3

NAMESPACE: Final[str] = "http://www.loc.gov/MARC21/slim"
NAMESPACE_NAME: Final[str] = "marc"
XSI_NAMESPACE: Final[str] = "http://www.w3.org/2001/XMLSchema-instance"
SCHEMA_URL: Final[str] = "http://www.loc.gov/standards/marcxml/schema/MARC21slim.xsd"
SCHEMA_LOCATION: Final[str] = f"{NAMESPACE} {SCHEMA_URL}"
