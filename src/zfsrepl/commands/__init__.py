from . import (
  list as list,
  versions as versions,
  version as version
)
