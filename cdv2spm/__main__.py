from cdv2spm.cli import main

main()
