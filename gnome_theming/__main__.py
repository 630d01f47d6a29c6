from gnome_theming.cli import main

if __name__ == "__main__":
    main()
