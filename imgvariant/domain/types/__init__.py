from imgvariant.domain.types.base import BaseInfo
from imgvariant.domain.types.blob import BlobInfo
