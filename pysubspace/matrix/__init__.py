"""
Dense matrix engine.

Column-major matrices with optional device mirrors, and the operations
the subspace-learning pipeline is built from.

Public API:
    Storage:      create, identity, zeros, ones, random_normal, from_array,
                  copy, copy_columns, copy_rows, release,
                  sync_to_device, sync_to_host
    Elementwise:  add, subtract, scalar_multiply, elementwise_apply,
                  mean_column, mean_row, subtract_columns, subtract_rows,
                  diagonalize, assign_column, assign_row, shuffle_columns
    Solvers:      product, transpose, inverse, eigen, generalized_eigen,
                  sqrtm, norm, covariance
    Distances:    dist_l1, dist_l2, dist_cos, distance
    I/O:          write_text, read_text, write_binary, read_binary,
                  write_file, read_file, image_read, image_write
"""

from pysubspace.matrix.matrix import (
    Matrix,
    create,
    identity,
    zeros,
    ones,
    random_normal,
    from_array,
    copy,
    copy_columns,
    copy_rows,
    release,
    sync_to_device,
    sync_to_host,
)
from pysubspace.matrix._elementwise import (
    add,
    subtract,
    scalar_multiply,
    elementwise_apply,
    mean_column,
    mean_row,
    subtract_columns,
    subtract_rows,
    diagonalize,
    assign_column,
    assign_row,
    shuffle_columns,
)
from pysubspace.matrix.solvers import (
    product,
    transpose,
    inverse,
    eigen,
    generalized_eigen,
    sqrtm,
    norm,
    covariance,
)
from pysubspace.matrix._distance import (
    DISTANCE_FUNCS,
    DistanceFunc,
    dist_l1,
    dist_l2,
    dist_cos,
    distance,
)
from pysubspace.matrix.io import (
    write_text,
    read_text,
    write_binary,
    read_binary,
    write_file,
    read_file,
)
from pysubspace.matrix.image import image_read, image_write

__all__ = [
    "Matrix",
    # Storage
    "create",
    "identity",
    "zeros",
    "ones",
    "random_normal",
    "from_array",
    "copy",
    "copy_columns",
    "copy_rows",
    "release",
    "sync_to_device",
    "sync_to_host",
    # Elementwise
    "add",
    "subtract",
    "scalar_multiply",
    "elementwise_apply",
    "mean_column",
    "mean_row",
    "subtract_columns",
    "subtract_rows",
    "diagonalize",
    "assign_column",
    "assign_row",
    "shuffle_columns",
    # Solvers
    "product",
    "transpose",
    "inverse",
    "eigen",
    "generalized_eigen",
    "sqrtm",
    "norm",
    "covariance",
    # Distances
    "DISTANCE_FUNCS",
    "DistanceFunc",
    "dist_l1",
    "dist_l2",
    "dist_cos",
    "distance",
    # I/O
    "write_text",
    "read_text",
    "write_binary",
    "read_binary",
    "write_file",
    "read_file",
    "image_read",
    "image_write",
]
