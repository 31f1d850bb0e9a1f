import mido, threading
from typing import Optional

from groovebox.controls.keyboard import key_for_midi


def handle_midi_message(groovebox, msg) -> Optional[str]:
    """Play a mido message on the groovebox piano; returns the note name it hit."""
    if msg.type == 'note_on' and msg.velocity > 0:
        key = key_for_midi(msg.note)
        groovebox.note_on(key.note)
        return key.note
    if msg.type == 'note_off' or (msg.type == 'note_on' and msg.velocity == 0):
        key = key_for_midi(msg.note)
        groovebox.note_off(key.note)
        return key.note
    return None


def start_midi_listener(groovebox, port_hint: str = "MIDI"):
    """
    Open a MIDI input (prefer one containing `port_hint`) and play incoming
    notes on the one-octave piano by pitch class. Returns the daemon thread.
    """
    def run():
        names = mido.get_input_names()
        if not names:
            print("[MIDI] No MIDI inputs found.")
            return
        chosen = next((n for n in names if port_hint.lower() in n.lower()), names[0])
        print(f"[MIDI] Using input: {chosen}")

        try:
            with mido.open_input(chosen) as port:
                for msg in port:
                    handle_midi_message(groovebox, msg)
        except OSError as e:
            print(f"[MIDI] Listener stopped: {e}")

    th = threading.Thread(target=run, name="MidiListener", daemon=True); th.start()
    return th
