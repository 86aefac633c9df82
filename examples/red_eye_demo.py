"""
Red-eye retouch demonstration.

Builds a synthetic portrait with two red pupils, corrects them through an
edit session, rotates the result and writes preview and full-resolution
exports so the retouch can be compared at both sizes.

Usage:
    python examples/red_eye_demo.py [output_dir]
"""

import sys
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

import logging
from PIL import Image, ImageDraw

from OR_Libs.ImageEditingLib.image_models import SourceImage
from OR_Libs.SessionLib.command_registry import get_default_registry
from OR_Libs.SessionLib.edit_session import EditSession


def build_portrait(width=1600, height=1200):
    """Skin-toned canvas with two red pupils."""
    img = Image.new("RGBA", (width, height), (224, 182, 150, 255))
    draw = ImageDraw.Draw(img)
    for cx in (width * 0.35, width * 0.65):
        cy = height * 0.45
        draw.ellipse([cx - 90, cy - 60, cx + 90, cy + 60], fill=(245, 245, 245, 255))
        draw.ellipse([cx - 40, cy - 40, cx + 40, cy + 40], fill=(210, 30, 35, 255))
    return img


def main():
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    output_dir = Path(sys.argv[1]) if len(sys.argv) > 1 else Path.cwd()

    session = EditSession(viewport_size=(864, 664))
    registry = get_default_registry()

    session.load_image(SourceImage.from_image(build_portrait()))
    preview_width, preview_height = session.preview_size
    print(f"Preview {preview_width}x{preview_height}, export {session.export_size}, "
          f"scale {session.render_scale:.2f}")

    registry.dispatch("toggle-red-eye-tool", session)
    registry.dispatch("set-brush-radius", session, radius=25)
    for fx in (0.35, 0.65):
        registry.dispatch("pointer", session, x=preview_width * fx, y=preview_height * 0.45)
    registry.dispatch("toggle-red-eye-tool", session)

    registry.dispatch("add-text", session)
    registry.dispatch("edit-text", session, field="content", value="Red-eye fixed")
    registry.dispatch("edit-text", session, field="y", value=0.85)
    registry.dispatch("apply-preset", session, preset_name="warm")
    registry.dispatch("rotate-right", session)

    session.surface.save(output_dir / "preview.png")
    saved = registry.dispatch("export", session, output_dir=str(output_dir))
    print(f"Wrote {output_dir / 'preview.png'} and {saved}")


if __name__ == "__main__":
    main()
