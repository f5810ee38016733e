"""Package entry point for ``python -m whisper_captions``.

WHY: Users run the converter as ``python -m whisper_captions clip.wav``.
Python's ``-m`` flag looks for ``__main__.py`` inside the package.

HOW: Delegates to the CLI's main() function.
"""

from whisper_captions.cli import main

if __name__ == "__main__":
    main()
