"""Transform data structures for scene object placement."""
import math
from dataclasses import dataclass, field
from typing import Iterable


@dataclass
class Vec3:
    """3D vector for positions, Euler angles and scales.

    Y is up. Used for any x/y/z triple across the tool:
    - Local positions relative to an array root
    - Euler rotation offsets in degrees
    - Per-axis scale factors
    """
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    def __iter__(self):
        """Allow tuple unpacking: x, y, z = vec3"""
        return iter((self.x, self.y, self.z))

    def __add__(self, other: 'Vec3') -> 'Vec3':
        return Vec3(self.x + other.x, self.y + other.y, self.z + other.z)

    def scaled(self, other: 'Vec3') -> 'Vec3':
        """Component-wise product."""
        return Vec3(self.x * other.x, self.y * other.y, self.z * other.z)

    def to_list(self) -> list:
        return [self.x, self.y, self.z]

    @classmethod
    def from_seq(cls, values: Iterable[float]) -> 'Vec3':
        """Build from any 3-element sequence.

        Raises:
            ValueError: If the sequence does not hold exactly 3 numbers
        """
        x, y, z = (float(v) for v in values)
        return cls(x, y, z)

    @classmethod
    def one(cls) -> 'Vec3':
        return cls(1.0, 1.0, 1.0)


@dataclass
class Quaternion:
    """Rotation quaternion stored as (x, y, z, w).

    Euler conversion follows the host convention: rotations are applied
    about Z, then X, then Y (q = qy * qx * qz), angles in degrees.
    """
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0
    w: float = 1.0

    def __iter__(self):
        return iter((self.x, self.y, self.z, self.w))

    def __mul__(self, other: 'Quaternion') -> 'Quaternion':
        """Hamilton product: the result applies `other` first, then `self`."""
        ax, ay, az, aw = self
        bx, by, bz, bw = other
        return Quaternion(
            aw * bx + ax * bw + ay * bz - az * by,
            aw * by - ax * bz + ay * bw + az * bx,
            aw * bz + ax * by - ay * bx + az * bw,
            aw * bw - ax * bx - ay * by - az * bz,
        )

    @classmethod
    def identity(cls) -> 'Quaternion':
        return cls(0.0, 0.0, 0.0, 1.0)

    @classmethod
    def from_euler(cls, x: float, y: float, z: float) -> 'Quaternion':
        """Create a rotation from Euler angles in degrees.

        Args:
            x: Pitch about the X axis
            y: Yaw about the Y axis
            z: Roll about the Z axis

        Returns:
            Quaternion equivalent to rotating by z, then x, then y
        """
        hx = math.radians(x) * 0.5
        hy = math.radians(y) * 0.5
        hz = math.radians(z) * 0.5
        qx = cls(math.sin(hx), 0.0, 0.0, math.cos(hx))
        qy = cls(0.0, math.sin(hy), 0.0, math.cos(hy))
        qz = cls(0.0, 0.0, math.sin(hz), math.cos(hz))
        return qy * qx * qz

    def to_euler(self) -> Vec3:
        """Convert back to Euler angles in degrees, each in [0, 360).

        Inverse of from_euler up to the usual Euler ambiguity; at gimbal
        lock (pitch of +-90) the roll is folded into the yaw.
        """
        x, y, z, w = self
        # Rotation matrix terms needed for the Z-X-Y decomposition
        m12 = 2.0 * (y * z - w * x)
        m02 = 2.0 * (x * z + w * y)
        m22 = 1.0 - 2.0 * (x * x + y * y)
        m10 = 2.0 * (x * y + w * z)
        m11 = 1.0 - 2.0 * (x * x + z * z)

        sin_pitch = max(-1.0, min(1.0, -m12))
        pitch = math.asin(sin_pitch)
        if abs(sin_pitch) < 0.999999:
            yaw = math.atan2(m02, m22)
            roll = math.atan2(m10, m11)
        else:
            m00 = 1.0 - 2.0 * (y * y + z * z)
            m20 = 2.0 * (x * z - w * y)
            yaw = math.atan2(-m20, m00)
            roll = 0.0

        return Vec3(*(math.degrees(a) % 360.0 for a in (pitch, yaw, roll)))

    def is_close(self, other: 'Quaternion', tolerance: float = 1e-6) -> bool:
        """Check if two quaternions describe the same rotation.

        q and -q are the same rotation, so the absolute dot product is used.
        """
        dot = sum(a * b for a, b in zip(self, other))
        return abs(abs(dot) - 1.0) <= tolerance

    def to_list(self) -> list:
        return [self.x, self.y, self.z, self.w]

    @classmethod
    def from_seq(cls, values: Iterable[float]) -> 'Quaternion':
        x, y, z, w = (float(v) for v in values)
        return cls(x, y, z, w)


@dataclass
class Transform:
    """Local transform of a scene object: position, rotation and scale."""
    position: Vec3 = field(default_factory=Vec3)
    rotation: Quaternion = field(default_factory=Quaternion.identity)
    scale: Vec3 = field(default_factory=Vec3.one)
