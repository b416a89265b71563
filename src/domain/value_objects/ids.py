from typing import NewType

TodoId = NewType("TodoId", str)
