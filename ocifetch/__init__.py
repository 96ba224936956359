"""ocifetch: resolve OCI artifact references and retrieve them as archives.

  - Tag precedence: a tag pinned in the URL always wins over an explicit version
  - No implicit ``latest``: unpinned, unversioned references are rejected
  - Pull -> load -> encode pipeline over pluggable registry clients and codecs
  - Deterministic ``<name>-<version>.tgz`` output filenames
"""

__version__ = "0.1.0"
__description__ = "Resolve OCI artifact references and retrieve them as archives"

from ocifetch.core.getter import RegistryGetter
from ocifetch.core.naming import artifact_filename
from ocifetch.core.resolver import resolve_reference

__all__ = ["RegistryGetter", "artifact_filename", "resolve_reference", "__version__"]
