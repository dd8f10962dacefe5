from modal_repl.adapters.textual.app import main

main()
