from codex_focus.cli.app import main

if __name__ == "__main__":
    main()
