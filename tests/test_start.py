"""Tests for the startup configuration check."""
import subprocess

import pytest

import start


@pytest.mark.parametrize("port", ["abc", "0", "70000", "-1"])
def test_invalid_port_fails_the_check(monkeypatch, port):
    monkeypatch.setenv("PORT", port)

    assert start.check_requirements() is False


def test_missing_key_is_only_a_warning(monkeypatch):
    monkeypatch.setenv("REASONING_PROVIDER", "groq")
    monkeypatch.delenv("GROQ_API_KEY", raising=False)
    monkeypatch.setenv("PORT", "5000")

    assert start.check_requirements() is True


def test_failed_check_does_not_launch_server(monkeypatch):
    def must_not_run(*args, **kwargs):
        raise AssertionError("server launched")

    monkeypatch.setenv("PORT", "not-a-port")
    monkeypatch.setattr(subprocess, "run", must_not_run)

    assert start.start_application() is False
