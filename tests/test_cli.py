"""
Tests for the command line interface in mock mode.
"""

import pendulum
from typer.testing import CliRunner

from barberbooking import __version__
from barberbooking.cli.app import app

runner = CliRunner()


def _future_date() -> str:
    return pendulum.now("America/Sao_Paulo").add(days=30).to_date_string()


def test_version():
    result = runner.invoke(app, ["version"])

    assert result.exit_code == 0
    assert __version__ in result.output


def test_barbers():
    result = runner.invoke(app, ["barbers"])

    assert result.exit_code == 0
    assert "Rafael Costa" in result.output


def test_slots_mock():
    result = runner.invoke(app, ["slots", "1", _future_date(), "--mock"])

    assert result.exit_code == 0
    assert "09:00 AM" in result.output


def test_slots_unknown_barber():
    result = runner.invoke(app, ["slots", "99", _future_date(), "--mock"])

    assert result.exit_code == 1
    assert "BARBER_NOT_FOUND" in result.output


def test_book_with_confirmation_mock():
    result = runner.invoke(app, [
        "book",
        "--barber", "2",
        "--service", "1",
        "--date", _future_date(),
        "--time", "11:00 AM",
        "--name", "Ana Lima",
        "--email", "ana@example.com",
        "--whatsapp", "+55 11 90000-0009",
        "--send-confirmation",
        "--mock",
    ])

    assert result.exit_code == 0
    assert "Appointment created" in result.output
    assert "Confirmation email sent" in result.output
