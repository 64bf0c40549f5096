import warnings

from ghdir.cli import ui


def test_progress_without_length_counts_bytes():
    with ui.download_progress() as progress:
        update = progress.start(None)
        update(10)
        update(5)
    assert progress.received == 15


def test_progress_with_length_does_not_warn():
    with warnings.catch_warnings():
        warnings.simplefilter("error")
        with ui.download_progress() as progress:
            update = progress.start(100)
            update(40)
            update(60)
    assert progress.received == 100
