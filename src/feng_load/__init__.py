"""FEng Load - chunk dispatch, package reader/writer and export."""
