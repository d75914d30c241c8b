"""Tests for flight metadata mapping and sidecar formatting."""

import pytest

from remote_gallery.core.metadata import (
    build_flight_metadata,
    format_number,
    format_sidecar,
    parse_angle,
)
from remote_gallery.core.models import FlightMetadata


class TestParseAngle:
    """Tests for angle extraction from the free-text comment."""

    @pytest.mark.parametrize(
        "comment,label,expected",
        [
            ("Pitch = 12.5", "Pitch", 12.5),
            ("pitch=-3", "Pitch", -3.0),
            ("ROLL   =   7.25", "Roll", 7.25),
            ("Yaw= 180.0 extra", "Yaw", 180.0),
        ],
    )
    def test_matches(self, comment, label, expected):
        assert parse_angle(comment, label) == expected

    @pytest.mark.parametrize(
        "comment",
        ["", "Pitch: 12", "Pitch = +4", "Pitch = .5", "no angles here"],
    )
    def test_no_match_is_none(self, comment):
        assert parse_angle(comment, "Pitch") is None


class TestBuildFlightMetadata:
    """Tests for mapping raw records."""

    def test_empty_record_defaults(self):
        metadata = build_flight_metadata({})

        assert metadata.date_time == "N/A"
        assert metadata.gps_latitude == 0
        assert metadata.gps_longitude == 0
        assert metadata.gps_altitude == 0
        assert metadata.pitch_angle is None
        assert metadata.roll_angle is None
        assert metadata.yaw_angle is None
        assert metadata.user_comment == ""

    def test_date_falls_back_to_create_date(self):
        metadata = build_flight_metadata({"CreateDate": "2025:01:01 00:00:00"})

        assert metadata.date_time == "2025:01:01 00:00:00"

    def test_original_date_wins(self):
        metadata = build_flight_metadata(
            {"DateTimeOriginal": "2025:02:02 00:00:00", "CreateDate": "2025:01:01 00:00:00"}
        )

        assert metadata.date_time == "2025:02:02 00:00:00"

    def test_angles_and_gps(self):
        metadata = build_flight_metadata(
            {
                "UserComment": "Pitch = 12.5 Roll = -3 Yaw = 180.0",
                "GPSLatitude": 10.5,
                "GPSLongitude": -20.25,
                "GPSAltitude": 120.5,
            }
        )

        assert metadata.pitch_angle == 12.5
        assert metadata.roll_angle == -3
        assert metadata.yaw_angle == 180
        assert metadata.gps_latitude == 10.5
        assert metadata.gps_longitude == -20.25
        assert metadata.gps_altitude == 120.5


class TestFormatSidecar:
    """Tests for the sidecar report text."""

    def test_round_trip_of_comment_angles(self):
        comment = "Pitch = 12.5 Roll = -3 Yaw = 180.0"
        metadata = build_flight_metadata({"UserComment": comment, "DateTimeOriginal": "2025:10:01 08:00:00"})

        text = format_sidecar("DSC01.JPG", metadata)

        assert text.split("\n") == [
            "File: DSC01.JPG",
            "DateTimeOriginal: 2025:10:01 08:00:00",
            "Pitch: 12.5",
            "Roll: -3",
            "Yaw: 180",
            "",
            "Location:",
            "Altitude: 0 m",
            "Latitude: 0 deg",
            "Longitude: 0 deg",
            "",
            "UserComment:",
            comment,
        ]

    def test_missing_values(self):
        text = format_sidecar("a.jpg", FlightMetadata())

        assert "DateTimeOriginal: N/A" in text
        assert "Pitch: N/A" in text
        assert "Roll: N/A" in text
        assert "Yaw: N/A" in text
        assert "Altitude: 0 m" in text
        assert "UserComment:" not in text
        assert text.endswith("Longitude: 0 deg")

    @pytest.mark.parametrize(
        "value,expected",
        [(None, "N/A"), (0, "0"), (0.0, "0"), (-0.0, "0"), (180.0, "180"), (12.5, "12.5"),
         (-3.0, "-3"), (37.774929, "37.774929"), (5e-05, "0.00005"), (-1.5e-05, "-0.000015"),
         (1e-06, "0.000001"), (1e-07, "1e-7"), (1.25e-10, "1.25e-10"), (1e21, "1e+21"),
         (1e20, "100000000000000000000"), (float("nan"), "NaN"), (float("-inf"), "-Infinity")],
    )
    def test_format_number(self, value, expected):
        assert format_number(value) == expected

    def test_small_coordinates_use_plain_notation(self):
        metadata = FlightMetadata(gps_latitude=5e-05, gps_longitude=-2e-05)

        text = format_sidecar("a.jpg", metadata)

        assert "Latitude: 0.00005 deg" in text
        assert "Longitude: -0.00002 deg" in text
