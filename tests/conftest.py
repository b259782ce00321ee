"""Shared fixtures: small real images and sample upstream payloads."""

from io import BytesIO

import pytest
from PIL import Image


def _encode(fmt: str) -> bytes:
    with BytesIO() as buffer:
        Image.new("RGB", (64, 64), color="white").save(buffer, format=fmt)
        return buffer.getvalue()


@pytest.fixture
def png_bytes() -> bytes:
    return _encode("PNG")


@pytest.fixture
def jpeg_bytes() -> bytes:
    return _encode("JPEG")


@pytest.fixture
def gif_bytes() -> bytes:
    return _encode("GIF")


@pytest.fixture
def basic_payload() -> dict:
    return {
        "request_id": "1470472868,dacf2ff1-ea45-4842-9c07-6e8418cea78b",
        "time_used": 752,
        "faces": [
            {
                "face_token": "ed319e807e039ae669a4d1af0922a0c8",
                "face_rectangle": {"top": 120, "left": 80, "width": 200, "height": 200},
                "attributes": {
                    "skinstatus": {"health": 80.5, "stain": 60.0, "acne": 10.0, "dark_circle": 40.0},
                    "age": {"value": 28},
                    "gender": {"value": "Female"},
                    "emotion": {"happiness": 70.0, "neutral": 20.0, "sadness": 10.0},
                    "beauty": {"male_score": 70.1, "female_score": 72.3},
                    "headpose": {"roll_angle": 2.1, "yaw_angle": 5.4, "pitch_angle": 1.0},
                    "blur": {"blurness": {"value": 0.5, "threshold": 50.0}},
                    "smiling": {"value": 88.0, "threshold": 50.0},
                },
            }
        ],
        "warning": [],
    }


@pytest.fixture
def advanced_payload() -> dict:
    return {
        "request_id": "1527162004,4c82b9b8-4b11-4d0e-b1a8-2b5ea1c7f3a2",
        "time_used": 561,
        "warning": [],
        "result": {
            "left_eyelids": {"value": "1", "confidence": 0.9},
            "right_eyelids": {"value": "0", "confidence": 0.8},
            "eye_pouch": {"value": "1", "confidence": 0.7},
            "dark_circle": {"value": "0", "confidence": 0.95},
            "forehead_wrinkle": {"value": "0", "confidence": 0.6},
            "crows_feet": {"value": "1", "confidence": 0.55},
            "eye_finelines": {"value": "0", "confidence": 0.6},
            "glabella_wrinkle": {"value": "0", "confidence": 0.6},
            "nasolabial_fold": {"value": "1", "confidence": 0.65},
            "pores_forehead": {"value": "1", "confidence": 0.8},
            "pores_left_cheek": {"value": "1", "confidence": 0.85},
            "pores_right_cheek": {"value": "0", "confidence": 0.7},
            "pores_jaw": {"value": "0", "confidence": 0.7},
            "blackhead": {"value": "0", "confidence": 0.9},
            "acne": {"value": "0", "confidence": 0.9},
            "mole": {"value": "0", "confidence": 0.9},
            "skin_spot": {"value": "1", "confidence": 0.75},
            "skin_type": {
                "skin_type": 3,
                "details": {
                    "0": {"value": 0, "confidence": 0.1},
                    "1": {"value": 0, "confidence": 0.04},
                    "2": {"value": 0, "confidence": 0.04},
                    "3": {"value": 1, "confidence": 0.82},
                },
            },
        },
    }
