import numpy as np
import pytest

from groovebox.audio.rack import build_mixer
from groovebox.controls.knobs import Knob
from groovebox.midi.messages import CC, DrumHit, NoteOff, NoteOn, ThereminMove
from groovebox.session import Groovebox


@pytest.fixture
def box(manual_clock, link):
    return Groovebox(clock=manual_clock, link=link, rng=np.random.default_rng(7))


def test_toggle_step_emits_one_based_step(box, sock):
    assert box.toggle_step(0) is True
    assert box.toggle_step(0) is False
    assert sock.events("stepUpdate") == [
        ("stepUpdate", {"step": 1, "active": True}),
        ("stepUpdate", {"step": 1, "active": False}),
    ]

def test_play_emits_transport_once(box, sock, manual_clock):
    assert box.play() is True
    assert box.play() is False
    assert sock.events("transport") == [("transport", {"action": "play", "bpm": 120})]
    assert manual_clock.starts == 1

def test_stop_emits_and_forces_record_off(box, sock):
    box.play()
    box.toggle_record()
    assert box.recording
    box.stop()
    assert not box.playing
    assert not box.recording
    assert sock.events("transport")[-1] == ("transport", {"action": "stop"})

def test_triggers_go_to_relay_and_bus(box, sock, manual_clock):
    box.toggle_step(2)
    box.play()
    manual_clock.tick(3)
    assert sock.events("trigger") == [("trigger", {"step": 3, "type": "HIHAT"})]
    assert DrumHit(step=3, drum="HIHAT") in box.bus.drain()

def test_tempo_change_end_to_end(box, sock, manual_clock):
    box.play()
    manual_clock.tick(3)
    assert box.sequencer.cursor == 3
    box.set_bpm(240)
    assert box.sequencer.cursor == 0
    assert box.playing
    assert manual_clock.period_ms == 62.5
    names = [e for e, _ in sock.sent]
    assert names[-3:] == ["transport", "transport", "bpm"]
    assert sock.sent[-1] == ("bpm", {"bpm": 240})
    manual_clock.tick()
    assert box.sequencer.cursor == 1

def test_tempo_change_while_stopped(box, sock):
    box.set_bpm(90)
    assert box.bpm == 90
    assert sock.events("transport") == []
    assert sock.events("bpm") == [("bpm", {"bpm": 90})]

def test_record_toggle(box, sock):
    assert box.toggle_record() is True
    assert box.toggle_record() is False
    assert sock.events("record") == [("record", {"recording": True}),
                                     ("record", {"recording": False})]

def test_clear_and_randomize(box):
    box.randomize_pattern()
    box.clear_pattern()
    assert box.pattern.active_count() == 0

def test_knob_turn_emits_parameter(box, sock):
    knob = Knob(param="detune", osc="1")
    assert box.add_knob(knob) == 0.5
    value = box.turn_knob(knob, delta_y=20)
    assert value == pytest.approx(0.6)
    assert sock.events("parameter") == [
        ("parameter", {"module": "1", "parameter": "detune", "value": value})]

def test_knob_clamps(box):
    knob = Knob(param="mix", fx="reverb")
    box.add_knob(knob)
    assert box.turn_knob(knob, delta_y=1000) == 1.0
    assert box.turn_knob(knob, delta_y=-1000, start_value=0.2) == 0.0

def test_cutoff_knob_reaches_the_synth(box):
    knob = Knob(param="cutoff", osc="1")
    box.add_knob(knob)
    box.set_knob(knob, 0.5)
    assert CC(control="osc_1_cutoff", value=0.5) in box.bus.drain()

def test_fader_emits_level(box, sock):
    level = box.move_fader("DRUMS", delta_y=-50, track_height=100)
    assert level == pytest.approx(1.0)
    level = box.move_fader("DRUMS", delta_y=25, track_height=100)
    assert level == pytest.approx(0.75)
    assert sock.events("fader")[-1] == ("fader", {"channel": "DRUMS", "value": 0.75})

def test_fader_sets_mixer_gain(manual_clock, link):
    mixer = build_mixer()
    box = Groovebox(clock=manual_clock, link=link, mixer=mixer)
    box.move_fader("SYNTH", delta_y=30, track_height=100)
    assert mixer.track("SYNTH").gain == pytest.approx(0.2)

def test_mute_and_solo(manual_clock, link):
    mixer = build_mixer()
    box = Groovebox(clock=manual_clock, link=link, mixer=mixer)
    assert box.toggle_mute("DRUMS") is True
    assert mixer.track("DRUMS").mute
    assert box.toggle_solo("SYNTH") is True
    assert box.toggle_solo("SYNTH") is False
    assert box.toggle_mute("NOPE") is False

def test_piano_note_on_off(box, sock):
    key = box.note_on("A")
    assert key.frequency == pytest.approx(220 * 2 ** (9 / 12))
    box.note_off("A")
    assert sock.events("midi") == [
        ("midi", {"type": "noteOn", "note": "A", "frequency": key.frequency}),
        ("midi", {"type": "noteOff", "note": "A"}),
    ]
    assert box.bus.drain() == [NoteOn(note="A", frequency=key.frequency),
                               NoteOff(note="A", frequency=key.frequency)]

def test_note_off_without_press_is_ignored(box, sock):
    assert box.note_off("C") is None
    assert sock.events("midi") == []

def test_computer_keys(box, sock):
    assert box.key_down("a").note == "C"
    assert box.key_down("a", repeat=True) is None
    assert box.key_down("k") is None      # C2 is off the piano
    assert box.key_down("z") is None
    assert box.key_up("a").note == "C"
    assert [d["type"] for _, d in sock.events("midi")] == ["noteOn", "noteOff"]

def test_theremin(box, sock):
    move = box.move_theremin(0.5, 0.25)
    assert move == ThereminMove(pitch=600.0, volume=0.375)
    assert sock.events("theremin") == [("theremin", {"x": 0.5, "y": 0.25})]

def test_patches(box, sock):
    box.add_knob(Knob(param="cutoff", osc="1"))
    assert box.save_patch() is True
    assert box.load_patch("current_patch") is True
    assert sock.events("savePatch") == [
        ("savePatch", {"name": "current_patch", "parameters": {"osc_1_cutoff": 0.5}})]
    assert sock.events("loadPatch") == [("loadPatch", {"name": "current_patch"})]

def test_pattern_loaded_from_server(box, sock):
    box.connect("http://relay")
    sock.handlers["patternLoaded"]({"name": "p", "steps": [True, False, True]})
    assert box.pattern.snapshot()[:3] == [True, False, True]
    sock.handlers["patternUpdated"]({"name": "live", "steps": [True]})
    assert box.pattern.snapshot()[1] is False

def test_standalone_groovebox_still_works(manual_clock):
    box = Groovebox(clock=manual_clock)
    box.toggle_step(0)
    box.play()
    manual_clock.tick()
    assert box.save_patch() is False
    assert DrumHit(step=1, drum="KICK") in box.bus.drain()

def test_independent_instances(manual_clock, link):
    a = Groovebox(clock=manual_clock, link=link)
    b = Groovebox()
    a.toggle_step(0)
    assert b.pattern.active_count() == 0
    b.close()

def test_toggle_step_outside_pattern_emits_nothing(box, sock):
    for bad in (-1, 16):
        with pytest.raises(IndexError):
            box.toggle_step(bad)
    assert sock.events("stepUpdate") == []
    assert box.pattern.active_count() == 0

def test_pattern_loaded_needs_a_list_of_steps(box, sock):
    box.connect("http://relay")
    sock.handlers["patternLoaded"]({"name": "p", "steps": "1010"})
    sock.handlers["patternLoaded"]({"name": "p", "steps": {"0": True}})
    sock.handlers["patternLoaded"]({"name": "p", "steps": 7})
    assert box.pattern.active_count() == 0

def test_triggers_survive_a_dropped_relay(box, sock, manual_clock):
    from socketio.exceptions import BadNamespaceError

    def gone(event, data):
        raise BadNamespaceError("/ is not a connected namespace.")
    box.toggle_step(0)
    box.play()
    sock.emit = gone
    manual_clock.tick()
    assert DrumHit(step=1, drum="KICK") in box.bus.drain()
    assert box.playing
