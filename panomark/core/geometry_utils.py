"""Geometry utility functions for 3-vector operations."""
from __future__ import annotations

import math
from typing import Tuple

Vector3 = Tuple[float, float, float]


def spherical_to_cartesian(heading_rad: float, pitch_rad: float, radius: float = 1.0) -> Vector3:
    """
    Convert a heading/pitch direction to a cartesian vector.

    Heading is the azimuth measured clockwise from +y, pitch the elevation
    above the x/y plane.

    :param heading_rad: Heading in radians
    :param pitch_rad: Pitch in radians
    :param radius: Length of the returned vector
    :return: Vector (x, y, z)
    """
    cos_p = math.cos(pitch_rad)
    return (
        radius * cos_p * math.sin(heading_rad),
        radius * cos_p * math.cos(heading_rad),
        radius * math.sin(pitch_rad),
    )


def calculate_norm(vector: Vector3) -> float:
    """
    Calulate the norm of a vector.

    :param vector: Vector (x, y, z)
    :return: Magnitude of the vector
    """
    return math.sqrt(vector[0] ** 2 + vector[1] ** 2 + vector[2] ** 2)


def normalize_vector(vector: Vector3) -> Vector3:
    """
    Normalize a 3D vector.

    :param vector: Vector (x, y, z)
    :return: Normalized vector (x, y, z)
    """
    norm = calculate_norm(vector)
    return tuple(v / norm for v in vector)


def scale_vector(vector: Vector3, factor: float) -> Vector3:
    """Multiply every component of a vector by factor."""
    return (vector[0] * factor, vector[1] * factor, vector[2] * factor)


def dot_product(vector1: Vector3, vector2: Vector3) -> float:
    """
    Calculate the dot product of two 3D vectors.

    :param vector1: Vector (x, y, z)
    :param vector2: Vector (x, y, z)
    :return: Dot product of the two vectors
    """
    return sum(v1 * v2 for v1, v2 in zip(vector1, vector2))


def cross_product(vector1: Vector3, vector2: Vector3) -> Vector3:
    """
    Calculate the cross product of two 3D vectors.

    :param vector1: First vector (x, y, z)
    :param vector2: Second vector (x, y, z)
    :return: Cross product vector (x, y, z)
    """
    return (
        vector1[1] * vector2[2] - vector1[2] * vector2[1],
        vector1[2] * vector2[0] - vector1[0] * vector2[2],
        vector1[0] * vector2[1] - vector1[1] * vector2[0],
    )
