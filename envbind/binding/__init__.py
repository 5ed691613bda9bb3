"""
Schema walking and type-directed value binding.

Derives field descriptors from dataclass annotations, composes lookup keys
for nested records, and converts environment text into typed field values.
"""
