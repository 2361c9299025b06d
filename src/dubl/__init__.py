from .tree import DUBLTree, Empty, Leaf, Branch
from .algebra import Algebra
from .operations import (leaf, branch, branch_gen, combine, combine_all,
                         get_u, get_u_field, leaves,
                         apply_d, apply_u_pre, apply_u_post, map_u, map_leaves,
                         fold, flatten)
