"""
Certificate PDF rendering.

Pure drawing code: takes the data printed on the certificate and writes a
single-page landscape PDF. No database access.
"""

import os
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from PIL import Image, ImageDraw, ImageFont

from learnhub import config

WIDTH, HEIGHT = 1920, 1080

BACKGROUND = (248, 249, 250)
PRIMARY = (0, 123, 255)
BORDER_INNER = (222, 226, 230)
DARK = (33, 37, 41)
BODY = (73, 80, 87)
MUTED = (108, 117, 125)
SUCCESS = (40, 167, 69)

FONT_DIR = "/usr/share/fonts/truetype/dejavu"


@dataclass(frozen=True)
class CertificateRenderData:
    """Everything printed on a certificate."""

    certificate_number: str
    verification_code: str
    student_name: str
    course_title: str
    instructor_name: str
    completion_date: datetime
    grade: Optional[str] = None


def certificate_filename(certificate_number: str) -> str:
    return f"certificate_{certificate_number}.pdf"


def _load_font(name: str, size: int):
    try:
        return ImageFont.truetype(os.path.join(FONT_DIR, name), size)
    except OSError:
        return ImageFont.load_default(size=size)


def _draw_page(data: CertificateRenderData) -> Image.Image:
    img = Image.new("RGB", (WIDTH, HEIGHT), color=BACKGROUND)
    draw = ImageDraw.Draw(img)

    draw.rectangle([40, 40, WIDTH - 40, HEIGHT - 40], outline=PRIMARY, width=6)
    draw.rectangle([60, 60, WIDTH - 60, HEIGHT - 60], outline=BORDER_INNER, width=2)

    brand_font = _load_font("DejaVuSans-Bold.ttf", 48)
    title_font = _load_font("DejaVuSerif-Bold.ttf", 64)
    name_font = _load_font("DejaVuSerif-Bold.ttf", 56)
    course_font = _load_font("DejaVuSans-Bold.ttf", 44)
    text_font = _load_font("DejaVuSans.ttf", 32)
    small_font = _load_font("DejaVuSans.ttf", 26)

    def centered(text, font, y, fill):
        bbox = draw.textbbox((0, 0), text, font=font)
        draw.text(((WIDTH - (bbox[2] - bbox[0])) / 2, y), text, fill=fill, font=font)

    completed_on = data.completion_date.strftime("%B %d, %Y").replace(" 0", " ")

    centered(config.PLATFORM_NAME, brand_font, 110, PRIMARY)
    centered(config.PLATFORM_TAGLINE, small_font, 175, MUTED)
    centered("Certificate of Completion", title_font, 240, DARK)
    centered("This is to certify that", text_font, 350, BODY)
    centered(data.student_name, name_font, 400, PRIMARY)
    centered("has successfully completed the course", text_font, 490, BODY)
    centered(data.course_title, course_font, 540, PRIMARY)
    centered(f"Instructor: {data.instructor_name}", text_font, 620, MUTED)
    centered(f"Completed on: {completed_on}", text_font, 670, MUTED)
    centered(f"Certificate ID: {data.certificate_number}", small_font, 730, MUTED)
    centered(f"Verification Code: {data.verification_code}", small_font, 770, MUTED)
    if data.grade:
        centered(f"Grade: {data.grade}", course_font, 830, SUCCESS)
    centered(f"This certificate can be verified at {config.VERIFY_URL}", small_font, 950, MUTED)

    return img


def render_certificate_pdf(data: CertificateRenderData, output_dir: str = None) -> str:
    """
    Render the certificate and write it to ``output_dir``.

    Returns the URL path of the written file
    (``<CERTIFICATES_URL_PREFIX>/certificate_<number>.pdf``).
    """
    if not data.student_name or not data.course_title:
        raise ValueError("Certificate holder name and course title are required")

    output_dir = output_dir or config.CERTIFICATES_DIR
    os.makedirs(output_dir, exist_ok=True)

    filename = certificate_filename(data.certificate_number)
    _draw_page(data).save(os.path.join(output_dir, filename), format="PDF", resolution=150.0)

    return f"{config.CERTIFICATES_URL_PREFIX.rstrip('/')}/{filename}"
