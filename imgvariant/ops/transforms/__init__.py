from imgvariant.ops.transforms.base import Transformer
from imgvariant.ops.transforms.registry import (
    TRANSFORMERS,
    can_transform,
    find_transformer,
    register_transformer,
    unregister_transformer,
)
from imgvariant.ops.transforms.pillow import PillowTransformer
