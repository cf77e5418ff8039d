"""
Block Catalog

Static registry of block templates. Provides template lookup, palette
grouping and search. Templates are never mutated after registration.
"""
from typing import Dict, List, Union

from strategy_builder.features.blocks.domain import BlockCategory, BlockTemplate, BlockType
from strategy_builder.shared.domain.exceptions import UnknownBlockTypeError
from strategy_builder.utils.message import Log


class BlockCatalog:
    """
    Registry for block templates.

    Keyed by BlockType; lookups accept the enum or its string value
    (case-insensitive).
    """

    def __init__(self):
        self._templates: Dict[BlockType, BlockTemplate] = {}
        self._initialized = False

    def register(self, template: BlockTemplate) -> None:
        """
        Register a block template.

        Args:
            template: BlockTemplate instance
        """
        if template.type in self._templates:
            Log.warning(f"BlockCatalog: Overwriting existing template: {template.type.value}")

        self._templates[template.type] = template
        Log.debug(f"BlockCatalog: Registered template '{template.type.value}' ({template.name})")

    def get(self, block_type: Union[BlockType, str]) -> BlockTemplate:
        """
        Get a template by type (case-insensitive for strings).

        Raises:
            UnknownBlockTypeError: If no template is registered for the type
        """
        if isinstance(block_type, str):
            try:
                block_type = BlockType.from_string(block_type)
            except ValueError:
                raise UnknownBlockTypeError(block_type)

        template = self._templates.get(block_type)
        if template is None:
            raise UnknownBlockTypeError(block_type.value)
        Log.debug(f"BlockCatalog: Lookup '{block_type.value}'")
        return template

    def has(self, block_type: Union[BlockType, str]) -> bool:
        try:
            self.get(block_type)
        except UnknownBlockTypeError:
            return False
        return True

    def list_all(self) -> List[BlockTemplate]:
        """List all registered templates in registration order."""
        return list(self._templates.values())

    def by_category(self, category: Union[BlockCategory, str]) -> List[BlockTemplate]:
        if isinstance(category, str):
            category = BlockCategory.from_string(category)
        return [t for t in self._templates.values() if t.category == category]

    def categories(self) -> Dict[BlockCategory, List[BlockTemplate]]:
        """Templates grouped by category, in palette order."""
        return {category: self.by_category(category) for category in BlockCategory}

    def search(self, query: str) -> List[BlockTemplate]:
        """
        Search templates by name, type, description, or tags.

        Args:
            query: Search query string

        Returns:
            List of matching templates
        """
        query_lower = query.lower()
        results = []

        for template in self._templates.values():
            if query_lower in template.name.lower():
                results.append(template)
                continue

            if query_lower in template.type.value:
                results.append(template)
                continue

            if query_lower in template.description.lower():
                results.append(template)
                continue

            if any(query_lower in tag.lower() for tag in template.tags):
                results.append(template)
                continue

        return results

    def initialize_default_types(self) -> None:
        """Register the built-in templates"""
        if self._initialized:
            return

        from strategy_builder.application.blocks import BUILTIN_TEMPLATES

        for template in BUILTIN_TEMPLATES:
            self.register(template)

        self._initialized = True
        Log.info(f"BlockCatalog: Initialized {len(self._templates)} default block templates")

    def __len__(self) -> int:
        return len(self._templates)

    def __contains__(self, block_type) -> bool:
        return self.has(block_type)


# Global catalog instance
_block_catalog = None


def get_block_catalog() -> BlockCatalog:
    """
    Get the global block catalog instance.

    Returns:
        BlockCatalog with the built-in templates registered
    """
    global _block_catalog
    if _block_catalog is None:
        _block_catalog = BlockCatalog()
        _block_catalog.initialize_default_types()
    return _block_catalog
