import pytest


@pytest.fixture
def notes(fs):
    """A small notes directory at /notes, on the fake filesystem."""
    fs.create_file('/notes/2024/2024-03-05.txt', contents='#2024-03-05 (Tuesday) #home #work \n\nPlanning day.\n')
    fs.create_file('/notes/2024/2024-03-07.txt', contents='#2024-03-07 #work\n\nRelease went out.\nAll good.\n')
    fs.create_file('/notes/2024/2024-04-01.txt', contents='#2024-04-01 #home\n\nGarden.\n')
    fs.create_file('/notes/ideas.txt', contents='#work #ideas\n\nSome IDEAS for later.\n')
    fs.create_file('/notes/.snotes/work.query.yml', contents='name: Work\ntagString: work\n')
    fs.create_file('/notes/.snotes/journal.template.yml',
                   contents='name: Journal\ndateOption: TODAY\ntags: journal\n')
    return fs
