"""
Catalog store for the leasing site.

Model Hierarchy:
- Brand: manufacturer, owns the master catalog
- MasterColor / MasterOption: brand-scoped templates
- Vehicle: leasable model with a sparse monthly price matrix
- Trim: trim level, eligible colors/options via TrimColor / TrimOption
- Color / Option: vehicle-scoped items, optionally linked to a master
"""

from .brand import Brand
from .vehicle import Vehicle
from .color import COLOR_TYPE_CHOICES, EXTERIOR, INTERIOR, Color, MasterColor
from .option import MasterOption, Option
from .trim import Trim, TrimColor, TrimOption

__all__ = [
    'Brand',
    'Vehicle',
    'Trim',
    'TrimColor',
    'TrimOption',
    'Color',
    'MasterColor',
    'Option',
    'MasterOption',
    'COLOR_TYPE_CHOICES',
    'EXTERIOR',
    'INTERIOR',
]
