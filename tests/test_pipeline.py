from archvm_installer.config import InstallConfig
from archvm_installer.pipeline import InstallCtx, run_pipeline


class Recorder:
    def __init__(self, step_id, log, fail=False):
        self.step_id = step_id
        self.log = log
        self.fail = fail

    def run(self, ctx, state):
        self.log.append(self.step_id)
        if self.fail:
            raise RuntimeError(f"{self.step_id} broke")
        state[self.step_id] = True
        return state


def test_runs_all_steps_in_order():
    log = []
    steps = [Recorder("a", log), Recorder("b", log), Recorder("c", log)]
    result = run_pipeline(ctx=InstallCtx(cfg=InstallConfig()), state={}, steps=steps)

    assert result.ok
    assert log == ["a", "b", "c"]
    assert result.completed_steps == ["a", "b", "c"]
    assert result.state["execution"]["current_step"] is None


def test_stops_at_first_failure():
    log = []
    steps = [Recorder("a", log), Recorder("b", log, fail=True), Recorder("c", log)]
    result = run_pipeline(ctx=InstallCtx(cfg=InstallConfig()), state={}, steps=steps)

    assert not result.ok
    assert log == ["a", "b"]
    assert result.completed_steps == ["a"]
    assert result.failed_step == "b"
    assert str(result.error) == "b broke"
    assert "c" not in result.state
