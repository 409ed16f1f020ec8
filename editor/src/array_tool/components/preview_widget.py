"""Top-down preview of an array set's instance transforms."""

from typing import List

from PyQt5.QtWidgets import QWidget
from PyQt5.QtCore import Qt, QPointF, QRectF
from PyQt5.QtGui import QPainter, QColor, QPen, QBrush, QPolygonF

from array_tool.models.transform import Transform


class PreviewWidget(QWidget):
    """Draws instances seen from above (+X right, +Z up) fitted to the widget.

    Each instance is a white box sized by its X/Z scale, rotated by its yaw,
    with a red triangle marking its forward (+Z) side.
    """

    PREVIEW_SIZE = 300  # Fixed 300x300 pixels
    MARGIN = 20  # Pixels kept clear around the fitted bounds

    def __init__(self, parent=None):
        super().__init__(parent)
        self.setFixedSize(self.PREVIEW_SIZE, self.PREVIEW_SIZE)
        self.transforms: List[Transform] = []
        self.placeholder = "No placements"  # Drawn when there is nothing to show

    def set_transforms(self, transforms: List[Transform]):
        """Update instance transforms and redraw."""
        self.transforms = list(transforms)
        self.placeholder = "No placements"
        self.update()

    def show_message(self, text: str):
        """Clear the instances and draw a message instead."""
        self.transforms = []
        self.placeholder = text
        self.update()

    def _world_bounds(self) -> QRectF:
        """XZ bounds of every instance, padded by its footprint."""
        xs, zs = [], []
        for t in self.transforms:
            half = max(abs(t.scale.x), abs(t.scale.z)) / 2
            xs.extend((t.position.x - half, t.position.x + half))
            zs.extend((t.position.z - half, t.position.z + half))
        return QRectF(min(xs), min(zs), max(xs) - min(xs), max(zs) - min(zs))

    def paintEvent(self, event):
        painter = QPainter(self)
        painter.setRenderHint(QPainter.Antialiasing)
        painter.fillRect(self.rect(), QColor(0, 0, 0))

        if not self.transforms:
            painter.setPen(QColor(160, 160, 160))
            painter.drawText(self.rect(), Qt.AlignCenter | Qt.TextWordWrap, self.placeholder)
            return

        bounds = self._world_bounds()
        usable = self.PREVIEW_SIZE - 2 * self.MARGIN
        extent = max(bounds.width(), bounds.height(), 1e-6)
        pixels_per_unit = usable / extent
        center = bounds.center()

        for t in self.transforms:
            # World XZ -> preview pixels, Z pointing up the screen
            x_px = self.PREVIEW_SIZE / 2 + (t.position.x - center.x()) * pixels_per_unit
            y_px = self.PREVIEW_SIZE / 2 - (t.position.z - center.y()) * pixels_per_unit
            width = max(abs(t.scale.x) * pixels_per_unit, 2.0)
            depth = max(abs(t.scale.z) * pixels_per_unit, 2.0)
            yaw = t.rotation.to_euler().y

            painter.save()
            painter.translate(float(x_px), float(y_px))
            painter.rotate(float(yaw))

            painter.setBrush(QBrush(QColor(255, 255, 255)))
            painter.setPen(QPen(QColor(255, 255, 255), 1))
            painter.drawRect(QRectF(-width / 2, -depth / 2, width, depth))

            # Forward marker on the +Z (screen top) edge
            triangle = QPolygonF([
                QPointF(-width / 2, -depth / 2),
                QPointF(width / 2, -depth / 2),
                QPointF(0.0, 0.0),
            ])
            painter.setBrush(QBrush(QColor(255, 0, 0)))
            painter.setPen(Qt.NoPen)
            painter.drawPolygon(triangle)

            painter.restore()
