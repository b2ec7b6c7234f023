from __future__ import annotations

from string import Template

from .cadence import address_literal, string_literal, uint64_literal


STORAGE_PATH = "/storage/NotepadV1"
PUBLIC_PATH = "/public/PublicNotepadV1"


_CREATE_NOTE = Template(
    """import NotepadManagerV1 from $manager

transaction {
    prepare(acct: AuthAccount) {
        var notepad = acct.borrow<&NotepadManagerV1.Notepad>(from: $storage)

        if notepad == nil {
            acct.save(<- NotepadManagerV1.createNotepad(), to: $storage)
            acct.link<&NotepadManagerV1.Notepad>($public, target: $storage)
        }

        var theNotepad = acct.borrow<&NotepadManagerV1.Notepad>(from: $storage)
        theNotepad?.addNote(title: $title, body: $body)
    }
}
"""
)

_DELETE_NOTE = Template(
    """import NotepadManagerV1 from $manager

transaction {
    prepare(acct: AuthAccount) {
        let notepad = acct.borrow<&NotepadManagerV1.Notepad>(from: $storage)
        notepad?.deleteNote(noteID: $note_id)
    }
}
"""
)

_DELETE_NOTEPAD = Template(
    """import NotepadManagerV1 from $manager

transaction {
    prepare(acct: AuthAccount) {
        var notepad <- acct.load<@NotepadManagerV1.Notepad>(from: $storage)!
        NotepadManagerV1.deleteNotepad(notepad: <- notepad)
    }
}
"""
)

_ALL_NOTES = Template(
    """import NotepadManagerV1 from $manager

pub fun main(): [NotepadManagerV1.NoteDTO]? {
    let notepadAccount = getAccount($owner)
    let notepadCapability = notepadAccount.getCapability<&NotepadManagerV1.Notepad>($public)
    let notepadReference = notepadCapability.borrow()

    return notepadReference == nil ? nil : notepadReference?.allNotes()
}
"""
)


def create_note_transaction(manager: str, title: str, body: str) -> str:
    """
    Creates and publishes the notepad on first use, then appends the note.
    Both steps run inside one transaction.
    """
    return _CREATE_NOTE.substitute(
        manager=address_literal(manager),
        storage=STORAGE_PATH,
        public=PUBLIC_PATH,
        title=string_literal(title),
        body=string_literal(body),
    )


def delete_note_transaction(manager: str, note_id: int) -> str:
    return _DELETE_NOTE.substitute(
        manager=address_literal(manager),
        storage=STORAGE_PATH,
        note_id=uint64_literal(note_id),
    )


def delete_notepad_transaction(manager: str) -> str:
    return _DELETE_NOTEPAD.substitute(
        manager=address_literal(manager),
        storage=STORAGE_PATH,
    )


def all_notes_script(manager: str, owner: str) -> str:
    return _ALL_NOTES.substitute(
        manager=address_literal(manager),
        owner=address_literal(owner),
        public=PUBLIC_PATH,
    )
