from setuptools import setup, find_packages

setup(
    name='tt2ww',
    version='1.0.0',
    packages=find_packages(exclude=['tests', 'tests.*']),
    include_package_data=True,
    python_requires='>=3.12',
    install_requires=[
        'colored>=2.2.3',
        'halo==0.0.31',
        'librosa>=0.10.1',
        'numpy>=1.26.2',
        'python-dotenv>=1.0.0',
        'soundfile>=0.12.1',
    ],
    extras_require={
        'test': [
            'pytest>=7.4',
        ],
    },
    entry_points='''
        [console_scripts]
        tt2ww=tt2ww.__main__:main
    ''',
    license='MIT',
    keywords='audio loudness decibel word timing typography',
    description='Sizes and colors words by the loudness of the audio they were spoken in',
    long_description=open('README.md').read(),
    long_description_content_type='text/markdown',
)
