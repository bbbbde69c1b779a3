from price_sampler.sampling.runtime.entrypoint import main

main()
