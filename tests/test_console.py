import pytest

from archvm_installer import console


@pytest.mark.parametrize("answer", ["y", "Y", " y "])
def test_confirm_accepts_single_y(answers, answer):
    answers(answer)
    assert console.confirm("Continue?") is True


@pytest.mark.parametrize("answer", ["", "n", "N", "yes", "yy", "q"])
def test_confirm_treats_everything_else_as_no(answers, answer):
    answers(answer)
    assert console.confirm("Continue?") is False


def test_colorize_can_be_disabled():
    assert console.colorize("hi", console.TermColors.ERROR, enabled=False) == "hi"
    assert console.colorize("hi", console.TermColors.ERROR, enabled=True).endswith(console.TermColors.ENDC)


def test_section_and_step_output(capsys):
    console.set_color(False)
    try:
        console.section("Disk Setup")
        console.step("Partitioning disk")
    finally:
        console.set_color(True)
    out = capsys.readouterr().out
    assert "==> Disk Setup" in out
    assert "--> Partitioning disk" in out
